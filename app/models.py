from typing import List

from pydantic import BaseModel, ConfigDict, Field


class ProductGroup(BaseModel):
    name: str = ""
    key: str = ""


class ProductType(BaseModel):
    name: str = ""
    key: str = ""


class Insurer(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field("", alias="_id")
    insurerCode: str = ""
    insurerName: str = ""


class Broker(BaseModel):
    key: str = ""
    channelName: str = ""


class Product(BaseModel):
    id: str = ""
    productName: str = ""
    productGroup: ProductGroup = Field(default_factory=ProductGroup)
    productType: ProductType = Field(default_factory=ProductType)
    insurer: Insurer = Field(default_factory=Insurer)
    brokers: List[Broker] = Field(default_factory=list)
    status: str = ""


class ProductsResponse(BaseModel):
    data: List[Product] = Field(default_factory=list)
