from typing import Any, Dict, Iterable, List, Optional

from .models import Product

# This file holds the in-memory product store. Nothing here is persisted or locked.

BOOTSTRAP_PRODUCTS: List[Dict[str, Any]] = [
    {
        "id": "1",
        "name": "Laptop",
        "description": "High-performance laptop with 16GB RAM",
        "price": 1200,
        "category": "electronics",
        "inStock": True,
    },
    {
        "id": "2",
        "name": "Smartphone",
        "description": "Latest model with 128GB storage",
        "price": 800,
        "category": "electronics",
        "inStock": True,
    },
    {
        "id": "3",
        "name": "Coffee Maker",
        "description": "Programmable coffee maker with timer",
        "price": 50,
        "category": "kitchen",
        "inStock": False,
    },
]


class ProductStore:
    """Ordered, process-local list of products. Every lookup is a linear scan."""

    def __init__(self, products: Optional[Iterable[Product]] = None):
        self._products: List[Product] = list(products or [])

    @classmethod
    def seeded(cls) -> "ProductStore":
        return cls(Product(**p) for p in BOOTSTRAP_PRODUCTS)

    def reset(self) -> None:
        self._products = [Product(**p) for p in BOOTSTRAP_PRODUCTS]

    def __len__(self) -> int:
        return len(self._products)

    def all(self) -> List[Product]:
        return list(self._products)

    def get(self, product_id: str) -> Optional[Product]:
        for p in self._products:
            if p.id == product_id:
                return p
        return None

    def by_category(self, category: str) -> List[Product]:
        wanted = category.lower()
        return [p for p in self._products if p.category.lower() == wanted]

    def search(self, term: str) -> List[Product]:
        term = term.lower()
        return [p for p in self._products if term in p.name.lower()]

    def add(self, product: Product) -> Product:
        self._products.append(product)
        return product

    def remove(self, product_id: str) -> Optional[Product]:
        for index, p in enumerate(self._products):
            if p.id == product_id:
                return self._products.pop(index)
        return None

    def category_counts(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for p in self._products:
            counts[p.category] = counts.get(p.category, 0) + 1
        return counts
