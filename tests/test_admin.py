# Test admin panel gating and catalog management
from core.admin import AdminPanel
from core.notifications import ADMIN_DENIED, LOGIN_REQUIRED
from data.models import Order
from data.orders import OrderBook
from fakes import ADMIN, USER1, build_core


class TestAdminPanel:

    def build(self, tmp_path):
        core = build_core(tmp_path)
        core.order_book = OrderBook(core.local_store)
        core.admin = AdminPanel(core.authority, core.catalog, core.order_book, core.notifier)
        return core

    def test_non_admin_is_denied(self, tmp_path):
        core = self.build(tmp_path)
        core.provider.login(USER1)

        assert core.admin.add_product('Bag', '5000', 'clothing', 'https://img/bag.jpg') is None
        assert core.admin.stats() is None
        assert core.notes[-1].kind == ADMIN_DENIED
        assert core.catalog.count() == 3

    def test_signed_out_is_asked_to_log_in(self, tmp_path):
        core = self.build(tmp_path)
        assert core.admin.delete_product(1, 'clothing') is False
        assert core.notes[-1].kind == LOGIN_REQUIRED

    def test_admin_adds_product(self, tmp_path):
        core = self.build(tmp_path)
        core.provider.login(ADMIN)

        product = core.admin.add_product('Bag', '5000', 'clothing', 'https://img/bag.jpg', 'Leather')
        assert product.price == 5000
        assert product.stock == 0
        assert core.catalog.find(product.id) == product
        assert core.notes[-1].message == '✅ Item added successfully!'

    def test_add_product_requires_fields(self, tmp_path):
        core = self.build(tmp_path)
        core.provider.login(ADMIN)

        assert core.admin.add_product('Bag', 'abc', 'clothing', 'https://img/bag.jpg') is None
        assert core.admin.add_product('', '100', 'clothing', 'https://img/bag.jpg') is None
        assert core.notes[-1].message == 'Please fill all required fields'
        assert core.catalog.count() == 3

    def test_admin_deletes_product(self, tmp_path):
        core = self.build(tmp_path)
        core.provider.login(ADMIN)

        assert core.admin.delete_product(2, 'clothing') is True
        assert core.catalog.find(2) is None
        assert core.admin.delete_product(2, 'clothing') is False
        assert core.notes[-1].message == 'Item not found'

    def test_stats(self, tmp_path):
        core = self.build(tmp_path)
        core.provider.login(ADMIN)
        core.order_book.record_order(Order(
            id='FB_1', customer_email='a@b.com', customer_name='Ada', customer_phone='080',
            delivery_address='', items=[], total=7000, date='2024-01-01T00:00:00'
        ))

        stats = core.admin.stats()
        assert stats['products_by_category'] == {'clothing': 2, 'service': 1}
        assert stats['total_products'] == 3
        assert stats['total_orders'] == 1
        assert stats['total_revenue'] == 7000
        assert len(core.admin.orders()) == 1
        assert core.admin.customers() == []
