"""
Validation du formulaire d'inscription: transforme les erreurs pydantic
en un dictionnaire {champ: message} affichable à côté de chaque champ.
"""
from typing import Any, Dict, Mapping

from pydantic import ValidationError

from .errors import RegistrationValidationError
from .models import RegistrationForm

# module campreg.registration.validation
REQUIRED_MESSAGES: Dict[str, str] = {
    "name": "The Name field is required.",
    "email": "The Email field is required.",
}
INVALID_EMAIL_MESSAGE = "The Email field is not a valid e-mail address."
INVALID_NUMBER_MESSAGE = "Please enter a valid number!"

def _message_for(field: str, error_type: str) -> str:
    if field == "email":
        if error_type == "missing":
            return REQUIRED_MESSAGES["email"]
        return INVALID_EMAIL_MESSAGE
    if field == "name":
        return REQUIRED_MESSAGES["name"]
    return INVALID_NUMBER_MESSAGE

def _blank_to_missing(data: Mapping[str, Any]) -> Dict[str, Any]:
    # Un champ de formulaire vide équivaut à un champ absent
    return {k: v for k, v in dict(data).items() if not (isinstance(v, str) and not v.strip())}

def parse_registration(data: Mapping[str, Any]) -> RegistrationForm:
    """
    Valide les valeurs brutes (str issues d'un formulaire, ou JSON) et retourne le formulaire typé.
    - Soulève RegistrationValidationError avec un message par champ invalide.
    """
    try:
        return RegistrationForm.model_validate(_blank_to_missing(data))
    except ValidationError as e:
        errors: Dict[str, str] = {}
        for err in e.errors():
            loc = err.get("loc") or ("__all__",)
            field = str(loc[0])
            if field not in errors:
                errors[field] = _message_for(field, err.get("type", ""))
        raise RegistrationValidationError(errors) from e
