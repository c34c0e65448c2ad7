# Service classes for the storefront routers.
# Each service owns the SQL for one table family; routers stay transport-focused.
