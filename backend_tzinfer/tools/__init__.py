"""Command-line tools for Backend TZInfer."""
