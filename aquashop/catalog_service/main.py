# aquashop/catalog_service/main.py
from fastapi import FastAPI, HTTPException

app = FastAPI(title="Catalog Service (dev mock)")


# fish rows carry title/size, food and accessories use name
CATALOG = {
    "fish": {
        "1": {"id": 1, "title": "Super Red Arowana", "price": 1200.00, "stock_quantity": 3,
              "image_url": "/media/fish/arowana-red.jpg", "video_url": "/media/fish/arowana-red.mp4",
              "size": "6 inch"},
        "2": {"id": 2, "title": "Red Turquoise Discus", "price": 45.00, "stock_quantity": 12,
              "image_url": "/media/fish/discus-turquoise.jpg", "size": "3 inch"},
        "3": {"id": 3, "title": "Platinum Arowana", "price": 8500.00, "stock_quantity": 0,
              "image_url": "/media/fish/arowana-platinum.jpg", "size": "8 inch"},
    },
    "food": {
        "1": {"id": 1, "name": "Arowana Pellets 500g", "price": 18.50, "stock_quantity": 40,
              "image_url": "/media/food/pellets.jpg"},
        "2": {"id": 2, "name": "Frozen Bloodworms", "price": 7.25, "stock_quantity": 0,
              "image_url": "/media/food/bloodworms.jpg"},
    },
    "accessories": {
        "1": {"id": 1, "name": "Canister Filter 1200 L/h", "price": 149.99, "stock_quantity": 5,
              "image_url": "/media/accessories/filter.jpg"},
    },
}


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/{product_type}/{product_id}")
def get_product(product_type: str, product_id: str):
    table = CATALOG.get(product_type)
    if table is None:
        raise HTTPException(status_code=404, detail="Unknown product type")

    product = table.get(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product
