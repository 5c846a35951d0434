API_TITLE = "Products REST API"
API_VERSION = "1.0.0"
API_DESCRIPTION = "API Docs for Products"

PRODUCTS_TAG = "Products"
OPENAPI_TAGS = [
    {
        "name": PRODUCTS_TAG,
        "description": "API operations related to products",
    }
]

PRODUCTS_PREFIX = "/api/products"
# GET /api/products отдаёт не больше стольких записей
PRODUCTS_PAGE_SIZE = 10

PRODUCT_NOT_FOUND = "Product not found!"
PRODUCT_CREATED = "created successfully"
PRODUCT_REMOVED = "Removed Product"
