# app/shared/services/pricing_service.py
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Tuple

from app.core.exceptions import InvalidQuantityError

CENTS = Decimal("0.01")
MAX_QUANTITY_PER_PRODUCT = 20

# (cantidad mínima, cantidad máxima, porcentaje de descuento)
DISCOUNT_TIERS: Tuple[Tuple[int, int, Decimal], ...] = (
    (1, 3, Decimal("0.00")),
    (4, 9, Decimal("0.10")),
    (10, MAX_QUANTITY_PER_PRODUCT, Decimal("0.20")),
)


@dataclass(frozen=True)
class ItemPricing:
    unit_price: Decimal
    quantity: int
    gross: Decimal
    discount: Decimal
    total: Decimal


def _money(value) -> Decimal:
    return Decimal(str(value)).quantize(CENTS, rounding=ROUND_HALF_UP)


def discount_rate_for(quantity: int) -> Decimal:
    """Porcentaje de descuento según el tramo de cantidad"""
    for low, high, rate in DISCOUNT_TIERS:
        if low <= quantity <= high:
            return rate
    raise InvalidQuantityError(quantity, MAX_QUANTITY_PER_PRODUCT)


def calculate_item_pricing(unit_price, quantity: int) -> ItemPricing:
    """
    Calcular descuento y total de una línea de venta.

    - 1 a 3 unidades: sin descuento
    - 4 a 9 unidades: 10% sobre el bruto
    - 10 a 20 unidades: 20% sobre el bruto

    Cantidad 0 significa eliminar el item y nunca llega aquí.
    """
    rate = discount_rate_for(quantity)
    price = _money(unit_price)
    gross = price * quantity
    discount = _money(gross * rate)

    return ItemPricing(
        unit_price=price,
        quantity=quantity,
        gross=_money(gross),
        discount=discount,
        total=_money(gross - discount)
    )


def apply_pricing(item, unit_price, quantity: int, product_name: Optional[str] = None) -> ItemPricing:
    """Aplicar o recalcular precio sobre un SaleItem"""
    pricing = calculate_item_pricing(unit_price, quantity)

    item.unit_price = pricing.unit_price
    item.quantity = pricing.quantity
    item.discount = pricing.discount
    item.total_value = pricing.total
    if product_name is not None:
        item.product_name = product_name

    return pricing


def recalculate_sale_total(sale) -> Decimal:
    """Total de la venta = suma de los totales de sus items"""
    total = sum((_money(item.total_value) for item in sale.items), Decimal("0.00"))
    sale.total_value = total
    return total
