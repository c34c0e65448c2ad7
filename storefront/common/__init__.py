"""
Cross-cutting helpers shared by every storefront service process: settings,
logging and schema bootstrap.
"""
