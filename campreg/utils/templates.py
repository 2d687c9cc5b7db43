# module campreg.utils.templates
from fastapi.templating import Jinja2Templates

from campreg.config import TEMPLATES_DIR
from campreg.registration.pricing import format_amount

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.filters["money"] = format_amount
