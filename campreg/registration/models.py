"""
Modèles de l'inscription au camp (formulaire, lignes de commande, référence de paiement).
Aucun de ces objets n'est persisté: ils vivent le temps d'une requête.
"""
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

# module campreg.registration.models
MAX_HEADCOUNT = 15


class RegistrationForm(BaseModel):
    """
    Formulaire d'inscription soumis par l'utilisateur.
    - Tous les champs sont requis.
    - Les effectifs sont bornés à [0, 15], les véhicules à [1, 15].
    - Les champs supplémentaires (ex: csrf_token) sont ignorés.
    """
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    name: str = Field(min_length=1)
    email: EmailStr
    friday_adults: int = Field(ge=0, le=MAX_HEADCOUNT)
    friday_children: int = Field(ge=0, le=MAX_HEADCOUNT)
    saturday_adults: int = Field(ge=0, le=MAX_HEADCOUNT)
    saturday_children: int = Field(ge=0, le=MAX_HEADCOUNT)
    vehicles: int = Field(ge=1, le=MAX_HEADCOUNT)


class LineItem(BaseModel):
    label: str
    description: str
    unit_amount: int = Field(ge=0)
    currency: str = "usd"
    quantity: int = Field(gt=0)

    @property
    def amount(self) -> int:
        return self.unit_amount * self.quantity

    def to_stripe(self) -> Dict[str, Any]:
        """
        Ligne au format Stripe Checkout (price_data en ligne, pas de Price pré-créé).
        """
        return {
            "quantity": self.quantity,
            "price_data": {
                "currency": self.currency,
                "unit_amount": self.unit_amount,
                "product_data": {
                    "name": self.label,
                    "description": self.description,
                },
            },
        }


class PaymentReference(BaseModel):
    checkout_session_id: str
    url: Optional[str] = None
