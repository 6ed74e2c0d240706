# storefront/catalog_service/main.py
from fastapi import FastAPI
from fastapi.responses import JSONResponse

app = FastAPI(title="Catalog Service (dev mock)")


ARTWORKS = {
    "art-1": {"id": "art-1", "title": "Hand-thrown Stoneware Mug", "price": 38.00, "artisanUserId": "artisan-1", "category": "ceramics"},
    "art-2": {"id": "art-2", "title": "Indigo Woven Throw", "price": 145.50, "artisanUserId": "artisan-2", "category": "textiles"},
    "art-3": {"id": "art-3", "title": "Walnut Serving Board", "price": 72.00, "artisanUserId": "artisan-1", "category": "woodwork"},
}


@app.get("/artworks")
def list_artworks(category: str | None = None):
    artworks = [a for a in ARTWORKS.values() if not category or category == "all" or a["category"] == category]
    return {"success": True, "artworks": artworks}


@app.get("/artworks/{artwork_id}")
def get_artwork(artwork_id: str):
    artwork = ARTWORKS.get(artwork_id)
    if not artwork:
        return JSONResponse(status_code=404, content={"success": False, "error": "Artwork not found"})
    return {"success": True, "artwork": artwork}
