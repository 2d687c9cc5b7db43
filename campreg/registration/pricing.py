"""
Traduction du formulaire en lignes de commande (pas de Stripe, pas d'I/O).
"""
from typing import Iterable, List, NamedTuple, Optional

from campreg.config import LEGACY_SATURDAY_CHILDREN_QUANTITY
from .models import LineItem, RegistrationForm

# module campreg.registration.pricing
CURRENCY = "usd"
ADULT_NIGHT_PRICE = 700  # centimes
CHILD_NIGHT_PRICE = 1
VEHICLE_PRICE = 1


class Category(NamedTuple):
    label: str
    description: str
    unit_amount: int
    trigger_field: str
    quantity_field: str


def categories(legacy_saturday_children: bool = LEGACY_SATURDAY_CHILDREN_QUANTITY) -> List[Category]:
    """
    Catégories facturables, dans l'ordre d'émission des lignes.
    - legacy_saturday_children: la ligne "Saturday Night Children" prend la quantité
      des enfants du vendredi (comportement historique), sinon celle du samedi.
    """
    saturday_children_qty = "friday_children" if legacy_saturday_children else "saturday_children"
    return [
        Category(
            "Friday Night Adults",
            "The amount of adults that will be camping with us on Friday Night.",
            ADULT_NIGHT_PRICE, "friday_adults", "friday_adults",
        ),
        Category(
            "Friday Night Children",
            "The amount of children that will be camping with us on Friday Night.",
            CHILD_NIGHT_PRICE, "friday_children", "friday_children",
        ),
        Category(
            "Saturday Night Adults",
            "The amount of adults that will be camping with us on Saturday Night.",
            ADULT_NIGHT_PRICE, "saturday_adults", "saturday_adults",
        ),
        Category(
            "Saturday Night Children",
            "The amount of children that will be camping with us on Saturday Night.",
            CHILD_NIGHT_PRICE, "saturday_children", saturday_children_qty,
        ),
        Category(
            "Vehicles",
            "The amount of Vehicles you plan on bringing",
            VEHICLE_PRICE, "vehicles", "vehicles",
        ),
    ]

def to_line_items(form: RegistrationForm, legacy_saturday_children: Optional[bool] = None) -> List[LineItem]:
    """
    Construit les lignes de commande à partir du formulaire validé.
    - Une ligne par catégorie dont le compteur est > 0, dans l'ordre fixe de categories().
    - Une ligne dont la quantité effective vaut 0 n'est jamais émise.
    """
    if legacy_saturday_children is None:
        legacy_saturday_children = LEGACY_SATURDAY_CHILDREN_QUANTITY
    items: List[LineItem] = []
    for cat in categories(legacy_saturday_children):
        if getattr(form, cat.trigger_field) <= 0:
            continue
        qty = getattr(form, cat.quantity_field)
        if qty <= 0:
            continue
        items.append(LineItem(
            label=cat.label,
            description=cat.description,
            unit_amount=cat.unit_amount,
            currency=CURRENCY,
            quantity=qty,
        ))
    return items

def order_total(items: Iterable[LineItem]) -> int:
    """Total de la commande en centimes."""
    return sum(item.amount for item in items)

def format_amount(minor_units: int, currency: str = CURRENCY) -> str:
    """
    Formate un montant en centimes pour l'affichage (ex: 1401 -> "$14.01").
    """
    value = f"{minor_units / 100:,.2f}"
    if currency.lower() == "usd":
        return f"${value}"
    return f"{value} {currency.upper()}"
