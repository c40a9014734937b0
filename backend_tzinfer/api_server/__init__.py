"""
API server package — HTTP interface.

Exposes timezone inference for address batches to the map UI and other clients,
and delegates all work to TimezoneInferenceService.
"""
