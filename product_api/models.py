# product_api/models.py
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Union


class Product(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    description: str
    price: Union[int, float]
    category: str
    in_stock: bool = Field(alias="inStock")


class ProductPage(BaseModel):
    page: int
    limit: int
    total: int
    products: List[Product]
