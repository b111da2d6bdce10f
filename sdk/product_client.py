# sdk/product_client.py
import os
from typing import Any, Dict, Optional

import httpx
import requests
from rich import print

API_KEY_HEADER = "x-api-key"


class ProductClient:
    def __init__(
        self,
        base_url: str = "http://localhost:3000",
        api_key: Optional[str] = None,
        timeout: int = 10,
        session: Optional[Any] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        # anything with a requests-style get/post/put/patch/delete works here
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout
        self.api_key = api_key
        self.transport = transport
        if api_key:
            self.session.headers.update({API_KEY_HEADER: api_key})

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def _json(self, r):
        r.raise_for_status()
        return r.json()

    def hello(self) -> str:
        r = self.session.get(self._url("/hello"), timeout=self.timeout)
        r.raise_for_status()
        return r.text

    # Queries
    def list_products(self, category: Optional[str] = None, page: Optional[int] = None, limit: Optional[int] = None):
        params: Dict[str, Any] = {}
        if category:
            params["category"] = category
        if page is not None:
            params["page"] = page
        if limit is not None:
            params["limit"] = limit
        r = self.session.get(self._url("/api/products"), params=params, timeout=self.timeout)
        return self._json(r)

    def get_product(self, product_id: str):
        r = self.session.get(self._url(f"/api/products/{product_id}"), timeout=self.timeout)
        return self._json(r)

    def search_products(self, q: str):
        r = self.session.get(self._url("/api/products/search"), params={"q": q}, timeout=self.timeout)
        return self._json(r)

    def stats(self):
        r = self.session.get(self._url("/api/products/stats"), timeout=self.timeout)
        return self._json(r)

    # Mutations
    def create_product(self, name: str, description: str, price: float, category: str, in_stock: bool = True):
        payload = {
            "name": name,
            "description": description,
            "price": price,
            "category": category,
            "inStock": in_stock,
        }
        r = self.session.post(self._url("/api/products"), json=payload, timeout=self.timeout)
        return self._json(r)

    def update_product(self, product_id: str, name: str, description: str, price: float, category: str, in_stock: bool):
        payload = {
            "name": name,
            "description": description,
            "price": price,
            "category": category,
            "inStock": in_stock,
        }
        r = self.session.put(self._url(f"/api/products/{product_id}"), json=payload, timeout=self.timeout)
        return self._json(r)

    def patch_product(self, product_id: str, **fields):
        # in_stock=... is sent as inStock
        if "in_stock" in fields:
            fields["inStock"] = fields.pop("in_stock")
        r = self.session.patch(self._url(f"/api/products/{product_id}"), json=fields, timeout=self.timeout)
        return self._json(r)

    def delete_product(self, product_id: str):
        r = self.session.delete(self._url(f"/api/products/{product_id}"), timeout=self.timeout)
        return self._json(r)

    # Async variants
    def _async_client(self) -> httpx.AsyncClient:
        headers = {API_KEY_HEADER: self.api_key} if self.api_key else {}
        return httpx.AsyncClient(
            base_url=self.base_url, headers=headers, timeout=self.timeout, transport=self.transport
        )

    async def get_product_async(self, product_id: str):
        async with self._async_client() as client:
            r = await client.get(f"/api/products/{product_id}")
            r.raise_for_status()
            return r.json()

    async def list_products_async(self, category: Optional[str] = None):
        params = {"category": category} if category else {}
        async with self._async_client() as client:
            r = await client.get("/api/products", params=params)
            r.raise_for_status()
            return r.json()


def _parse_bool(raw: str) -> bool:
    return raw.strip().lower() in ("1", "true", "yes", "y")


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Product API CLI")
    parser.add_argument("--url", default=os.environ.get("PRODUCT_API_URL", "http://127.0.0.1:3000"))
    parser.add_argument("--api-key", default=os.environ.get("API_KEY"))
    subparsers = parser.add_subparsers(dest="command", required=True)

    lp = subparsers.add_parser("list", help="List products")
    lp.add_argument("--category", help="Filter products by category")
    lp.add_argument("--page", type=int, help="1-based page number")
    lp.add_argument("--limit", type=int, help="Page size")

    gp = subparsers.add_parser("get", help="Get a product by its ID")
    gp.add_argument("--product-id", required=True)

    sp = subparsers.add_parser("search", help="Search products by name")
    sp.add_argument("--q", required=True, help="Substring of the product name")

    subparsers.add_parser("stats", help="Count products per category")

    for cmd in ("create", "update"):
        p = subparsers.add_parser(cmd, help=f"{cmd.capitalize()} a product")
        if cmd == "update":
            p.add_argument("--product-id", required=True)
        p.add_argument("--name", required=True)
        p.add_argument("--description", required=True)
        p.add_argument("--price", type=float, required=True)
        p.add_argument("--category", required=True)
        p.add_argument("--in-stock", type=_parse_bool, default=True)

    dp = subparsers.add_parser("delete", help="Delete a product")
    dp.add_argument("--product-id", required=True)

    args = parser.parse_args()
    c = ProductClient(base_url=args.url, api_key=args.api_key)

    if args.command == "list":
        print(c.list_products(args.category, args.page, args.limit))
    elif args.command == "get":
        print(c.get_product(args.product_id))
    elif args.command == "search":
        print(c.search_products(args.q))
    elif args.command == "stats":
        print(c.stats())
    elif args.command == "create":
        print(c.create_product(args.name, args.description, args.price, args.category, args.in_stock))
    elif args.command == "update":
        print(c.update_product(args.product_id, args.name, args.description, args.price, args.category, args.in_stock))
    elif args.command == "delete":
        print(c.delete_product(args.product_id))
