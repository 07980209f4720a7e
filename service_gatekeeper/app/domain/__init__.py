"""
Cross-cutting request handling for the Gatekeeper (the gating middleware).
"""
