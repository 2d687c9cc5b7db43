# campreg.config
from pathlib import Path
import os
from dotenv import load_dotenv

# Calculer le chemin du projet puis charger .env de manière explicite
BASE_DIR = Path(__file__).resolve().parent.parent
ENV_PATH = BASE_DIR / ".env"
load_dotenv(dotenv_path=ENV_PATH, override=True)

PUBLIC_DIR = BASE_DIR / "public"
TEMPLATES_DIR = BASE_DIR / "templates"

"""
Configuration centrale de l'application d'inscription.

- Charge le fichier .env à la racine du projet (BASE_DIR/.env)
- Expose les chemins utiles (PUBLIC_DIR, TEMPLATES_DIR)
- Normalise et expose les clés Stripe, la sécurité cookies, CORS/hosts
- Fournit les URLs de redirection du checkout (succès / annulation)
"""

def _clean_env(v: str) -> str:
    """
    Nettoie une valeur d'environnement:
    - supprime les espaces et guillemets (simples, doubles) et backticks
    - retourne toujours une chaîne (jamais None)
    """
    return (v or "").strip().strip("'").strip('"').strip("`")

def _env_flag(name: str, default: str = "false") -> bool:
    return _clean_env(os.getenv(name, default)).lower() in ("1", "true", "yes", "on")

# Cookies / sécurité
COOKIE_SECURE = _env_flag("COOKIE_SECURE")

# CORS (dev)
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
ALLOWED_HOSTS = [h.strip() for h in os.getenv("ALLOWED_HOSTS", "localhost,127.0.0.1").split(",") if h.strip()]

# Stripe: clé publique (Stripe.js) et clé secrète (serveur)
STRIPE_PUBLIC_KEY = _clean_env(os.getenv("STRIPE_PUBLIC_KEY") or "")
STRIPE_SECRET_KEY = _clean_env(os.getenv("STRIPE_SECRET_KEY") or "")

# Racine publique de l'application (sert de cible par défaut aux redirections Stripe)
BASE_URL = _clean_env(os.getenv("BASE_URL") or "http://localhost:8000").rstrip("/")

# Pages de succès/annulation du checkout: par défaut, la racine de l'application
CHECKOUT_SUCCESS_URL = _clean_env(os.getenv("CHECKOUT_SUCCESS_URL") or "") or f"{BASE_URL}/"
CHECKOUT_CANCEL_URL = _clean_env(os.getenv("CHECKOUT_CANCEL_URL") or "") or f"{BASE_URL}/"

# Ligne "Saturday Night Children": conserve l'ancien calcul (quantité = enfants du vendredi)
LEGACY_SATURDAY_CHILDREN_QUANTITY = _env_flag("LEGACY_SATURDAY_CHILDREN_QUANTITY", "true")
