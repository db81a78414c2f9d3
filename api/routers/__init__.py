"""
API Routers - Organized endpoint handlers for the Reslife API.

- community: whole-community analysis, two-subgroup decomposition and
  strength filtration
"""
