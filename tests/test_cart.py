import pytest

from remitos.order.cart import Cart, CartLine


class TestCart:
    def test_repeated_add_accumulates(self):
        cart = Cart()
        cart.add("Agua", 2, 100)
        cart.add("Agua", 3, 999)  # price is not re-synced
        assert cart.lines == [CartLine(producto="Agua", cantidad=5, precio=100)]

    def test_one_line_per_product_in_insertion_order(self):
        cart = Cart()
        for name, q in [("A", 1), ("B", 2), ("A", 4), ("C", 1), ("B", 0.5)]:
            cart.add(name, q, 10)
        assert [(l.producto, l.cantidad) for l in cart] == [("A", 5), ("B", 2.5), ("C", 1)]
        assert len(cart) == 3

    def test_total_follows_mutations(self):
        cart = Cart()
        cart.add("A", 2, 10.5)
        cart.add("B", 1, 4)
        assert cart.total == pytest.approx(25.0)
        cart.remove(0)
        assert cart.total == pytest.approx(4.0)
        cart.remove(0)
        assert cart.total == 0
        assert cart.is_empty

    @pytest.mark.parametrize("index", [-1, 2, 99, "0", None, 1.0, True])
    def test_remove_invalid_index_is_noop(self, index):
        cart = Cart()
        cart.add("A", 1, 1)
        cart.add("B", 1, 1)
        assert cart.remove(index) is False
        assert [l.producto for l in cart] == ["A", "B"]

    def test_remove_by_position(self):
        cart = Cart()
        for name in "ABC":
            cart.add(name, 1, 1)
        assert cart.remove(1) is True
        assert [l.producto for l in cart] == ["A", "C"]
