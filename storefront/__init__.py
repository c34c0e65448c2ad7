"""
Storefront services: accounts, catalog, cart, orders and shipments behind one
shared authorization guard.
"""
