"""
Application configuration and constants
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# =====================================================
# APPLICATION CONFIGURATION
# =====================================================

APP_CONFIG = {
    'app_name': 'Favs Bling',
    'version': '1.0.0',
    'organization': 'Favs Bling',
    'support_email': 'support@favsbling.com'
}

# =====================================================
# DIRECTORY PATHS
# =====================================================

DATA_DIR = Path(os.getenv('FAVS_DATA_DIR', str(Path.home() / '.favsbling')))

STORAGE_CONFIG = {
    'local_db_path': DATA_DIR / 'local_store.db',
    'receipts_dir': DATA_DIR / 'receipts'
}

# Keys used in the local key-value store
LOCAL_STORE_KEYS = {
    'products': 'favsProducts',
    'orders': 'favsOrders',
    'customers': 'favsCustomers',
    'cart_prefix': 'favsCart_'
}

# =====================================================
# BACKEND CONFIGURATION
# =====================================================

BACKEND_CONFIG = {
    'base_url': os.getenv('FAVS_BACKEND_URL', 'https://favs-b-backend.onrender.com'),
    'api_token': os.getenv('FAVS_API_TOKEN', ''),
    'timeout': 10
}

# Used whenever GET /config cannot be trusted
FALLBACK_CONFIG = {
    'FIREBASE_API_KEY': 'fallback_safe_key',
    'FIREBASE_AUTH_DOMAIN': 'favs-bling.firebaseapp.com',
    'FIREBASE_DATABASE_URL': 'https://favs-bling-default-rtdb.firebaseio.com',
    'FIREBASE_PROJECT_ID': 'favs-bling',
    'FIREBASE_STORAGE_BUCKET': 'favs-bling.appspot.com',
    'FIREBASE_MESSAGING_SENDER_ID': '000000000000',
    'FIREBASE_APP_ID': '1:000000000000:web:fallback123',
    'PAYSTACK_PUBLIC_KEY': 'pk_test_fallbackmode',
    'ADMIN_EMAIL': 'admin@favsbling.com',
    'BACKEND_URL': 'https://favs-b-backend.onrender.com',
    'APP_NAME': 'Favs Bling',
    'SUPPORT_EMAIL': 'support@favsbling.com',
    'ENABLE_BACKEND': True,
    'ENABLE_PAYSTACK': False,
    'ENABLE_FIREBASE': True
}

# =====================================================
# PAYMENT CONFIGURATION
# =====================================================

PAYMENT_CONFIG = {
    'provider': 'paystack',
    'currency': 'NGN',
    'currency_symbol': '₦',
    'reference_prefix': 'FB_',
    'minor_units_per_major': 100  # kobo per naira
}

# =====================================================
# CATALOG
# =====================================================

CATALOG_CATEGORIES = ['clothing', 'service']

# =====================================================
# ACCOUNTS
# =====================================================

AUTH_CONFIG = {
    'min_password_length': 6,
    'identity_toolkit_url': 'https://identitytoolkit.googleapis.com/v1',
    'timeout': 15
}

LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
