"""Document store collection names.

The store has no DDL; collections appear on first write. These constants are
the single source of truth for the layout.
"""

COLLECTION_PRODUCTS = "products"
COLLECTION_PROJECTS = "projects"
COLLECTION_CUSTOM_SECTIONS = "custom_sections"

# Per-tenant taxonomy, keyed by tenant name instead of a generated id
COLLECTION_CLASSIFICATIONS = "classifications"

# Flat quick-add lists shown on the product form
COLLECTION_CATEGORIES = "categories"
COLLECTION_BRANDS = "brands"
COLLECTION_WEBSITES = "websites"

# Owned by the auth layer, never written by the catalog core
COLLECTION_USERS = "users"

LIST_COLLECTIONS = (COLLECTION_CATEGORIES, COLLECTION_BRANDS, COLLECTION_WEBSITES)
