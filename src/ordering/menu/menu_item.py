"""MenuItem aggregate — the priced dishes chefs offer.

Menus are maintained outside this service; the aggregate is the catalog the
order builder prices lines against. Prices are read at order time and copied
onto the order line, so later price changes never reach placed orders.
"""

from protean.fields import Boolean, DateTime, Float, Identifier, String

from ordering.domain import ordering


@ordering.aggregate
class MenuItem:
    chef_id: Identifier(required=True)
    name: String(required=True, max_length=255)
    price: Float(required=True, min_value=0.0)
    available: Boolean(default=True)
    updated_at: DateTime()
