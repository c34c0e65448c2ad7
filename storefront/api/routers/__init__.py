# Route modules, one per storefront service plus the operational health routes.
