from typing import Dict


class RegistrationValidationError(Exception):
    """
    Un ou plusieurs champs du formulaire sont invalides.
    errors: {champ: message} (un message par champ, le premier rencontré).
    """

    def __init__(self, errors: Dict[str, str]):
        super().__init__(", ".join(sorted(errors)) or "invalid registration")
        self.errors = errors


class CheckoutError(Exception):
    """
    La session Stripe Checkout n'a pas pu être créée
    (clé manquante, commande vide, refus ou indisponibilité du fournisseur).
    """
