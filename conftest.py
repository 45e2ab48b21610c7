import os
import django

# Configure Django settings before any tests are run
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'transport_core.test_settings')
django.setup()

# python -m pytest
# python manage.py test --settings=transport_core.test_settings
