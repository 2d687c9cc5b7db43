# module campreg.app
from campreg.app_setup.factory import create_app

# App globale
app = create_app()
