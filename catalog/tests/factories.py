from decimal import Decimal

import factory
from catalog.models import Category, Item, ItemPrice
from factory import Faker
from factory.django import DjangoModelFactory


class CategoryFactory(DjangoModelFactory):
    class Meta:
        model = Category

    name = Faker("word")
    is_active = True
    sort_order = 0


class ItemFactory(DjangoModelFactory):
    class Meta:
        model = Item

    name = Faker("sentence", nb_words=2)
    details = Faker("sentence")
    category = factory.SubFactory(CategoryFactory)
    status = Item.STATUS_PUBLISHED


class ItemPriceFactory(DjangoModelFactory):
    class Meta:
        model = ItemPrice

    item = factory.SubFactory(ItemFactory)
    price = Decimal("10.00")
    size = factory.Iterator(["Small", "Medium", "Large"])
