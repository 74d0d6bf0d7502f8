import enum

from storefront.services.catalog_service.models import Category, Product
from storefront.services.order_service.models import Order, OrderItem

from .errors import UnknownFieldError


class EntityKind(str, enum.Enum):
    CATEGORY = "category"
    PRODUCT = "product"
    ORDER = "order"
    ORDER_ITEM = "order_item"


MODELS = {
    EntityKind.CATEGORY: Category,
    EntityKind.PRODUCT: Product,
    EntityKind.ORDER: Order,
    EntityKind.ORDER_ITEM: OrderItem,
}

# Collections an entity owns and that may be written together with it
NESTED = {
    EntityKind.ORDER: ("order_items", EntityKind.ORDER_ITEM, "order_id"),
}

# Parents an entity is always loaded with: relation, parent kind, foreign key
PARENTS = {
    EntityKind.PRODUCT: ("category", EntityKind.CATEGORY, "category_id"),
}

# Dependency order for clearing every collection
DELETION_ORDER = (
    EntityKind.ORDER_ITEM,
    EntityKind.ORDER,
    EntityKind.PRODUCT,
    EntityKind.CATEGORY,
)


def model_for(kind: EntityKind):
    return MODELS[EntityKind(kind)]


def kind_for_table(table_name: str) -> EntityKind:
    for kind, model in MODELS.items():
        if model.__tablename__ == table_name:
            return kind
    raise KeyError(table_name)


def column_names(kind: EntityKind) -> set[str]:
    return {column.key for column in model_for(kind).__table__.columns}


def split_fields(kind: EntityKind, fields: dict, allow_nested: bool = True):
    """Separates scalar column values from nested child rows.

    Returns ``(scalars, children)`` where ``children`` is a list of field dicts
    (empty when the kind owns no collection). Unknown names raise
    UnknownFieldError.
    """
    scalars = dict(fields)
    children = []

    nested = NESTED.get(EntityKind(kind))
    if nested and nested[0] in scalars:
        if not allow_nested:
            raise UnknownFieldError(f"{nested[0]} cannot be written on update")
        children = [dict(child) for child in scalars.pop(nested[0]) or []]

    unknown = set(scalars) - column_names(kind)
    if unknown:
        raise UnknownFieldError(
            f"Unknown field(s) for {EntityKind(kind).value}: {', '.join(sorted(unknown))}"
        )

    if children:
        child_kind = nested[1]
        for child in children:
            child_unknown = set(child) - column_names(child_kind)
            if child_unknown:
                raise UnknownFieldError(
                    f"Unknown field(s) for {child_kind.value}: {', '.join(sorted(child_unknown))}"
                )

    return scalars, children
