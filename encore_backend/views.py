from django.conf import settings
from django.shortcuts import redirect

def index(request):
    # The API has no pages of its own; send browsers to the public site
    return redirect(settings.FRONTEND_URL)
