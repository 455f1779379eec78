import pytest
from decimal import Decimal
from datetime import timedelta
from django.contrib.auth.models import User
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.catalog.models import Classification, Product, Taxon, Taxonomy


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def catalog_staff(db):
    """Create and return a staff user."""
    return User.objects.create_user(
        username='catalog_staff',
        email='catalog@example.com',
        password='TestPass123!',
        is_staff=True,
    )


@pytest.fixture
def catalog_customer(db):
    """Create and return a regular user."""
    return User.objects.create_user(
        username='catalog_customer',
        password='TestPass123!',
    )


@pytest.fixture
def staff_client(api_client, catalog_staff):
    """Return API client authenticated as staff."""
    refresh = RefreshToken.for_user(catalog_staff)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def customer_client(catalog_customer):
    """Return API client authenticated as a customer."""
    client = APIClient()
    refresh = RefreshToken.for_user(catalog_customer)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def taxonomy(db):
    """'Categories' taxonomy; its root taxon is created with it."""
    return Taxonomy.objects.create(name='Categories')


@pytest.fixture
def root(taxonomy):
    return taxonomy.root


@pytest.fixture
def clothing(taxonomy, root):
    return Taxon.objects.create(taxonomy=taxonomy, parent=root, name='Clothing')


@pytest.fixture
def shirts(taxonomy, clothing):
    return Taxon.objects.create(taxonomy=taxonomy, parent=clothing, name='T-Shirts')


@pytest.fixture
def mugs(taxonomy, root):
    return Taxon.objects.create(taxonomy=taxonomy, parent=root, name='Mugs')


def make_product(name, price, brand='', available=True):
    available_on = timezone.now() - timedelta(days=1) if available else None
    return Product.objects.create(
        name=name,
        price=Decimal(price),
        brand=brand,
        available_on=available_on,
    )


@pytest.fixture
def products(shirts, mugs):
    """Three shirts and a mug, one shirt not yet available."""
    ruby = make_product('Ruby Tee', '9.99', brand='Ruby')
    python = make_product('Python Tee', '16.00', brand='Python')
    unreleased = make_product('Future Tee', '25.00', brand='Ruby', available=False)
    mug = make_product('Ruby Mug', '12.00', brand='Ruby')

    for product in (ruby, python, unreleased):
        Classification.objects.create(product=product, taxon=shirts)
    Classification.objects.create(product=mug, taxon=mugs)

    return {'ruby': ruby, 'python': python, 'unreleased': unreleased, 'mug': mug}
