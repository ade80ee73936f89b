"""
API server package — HTTP interface for the SOS button.

The frontend calls POST /api/emergency and renders whatever comes back.
"""
