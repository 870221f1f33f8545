"""Unit tests for customers, carts, and the address book."""

from __future__ import annotations

import pytest

from farm_sales.constants import Barcode
from farm_sales.customers import AddressBook, Customer
from farm_sales.exceptions import (
    CustomerNotFoundError,
    DuplicateCustomerError,
    MissingReferenceError,
)
from farm_sales.products import Product


# ---------------------------------------------------------------------------
# Customer
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("name, phone", [("   ", 5550101), ("Alice", 0), ("Alice", -4)])
def test_customer_rejects_invalid_identity(name, phone, caplog: pytest.LogCaptureFixture):
    """Customers need a non-blank name and a positive phone number."""

    caplog.set_level("ERROR")

    with pytest.raises(ValueError):
        Customer(name, phone, "1 Farm Lane")
    assert any(record.levelname == "ERROR" for record in caplog.records)


def test_customer_setters_ignore_invalid_updates(customer):
    """Invalid updates keep the previous value."""

    customer.name = "  "
    customer.phone_number = -1
    customer.address = ""

    assert customer.name == "Alice"
    assert customer.phone_number == 5550101
    assert customer.address == "1 Farm Lane"

    customer.address = "3 Barn Street"
    assert customer.address == "3 Barn Street"


def test_customer_identity_uses_name_and_phone(customer):
    """Equality ignores the address and the cart."""

    twin = Customer("Alice", 5550101, "Elsewhere")

    assert twin == customer
    assert Customer("Alice", 5550102, "1 Farm Lane") != customer


def test_customer_is_not_hashable(customer):
    """Mutable identity fields keep customers out of sets and dict keys."""

    with pytest.raises(TypeError):
        hash(customer)
    with pytest.raises(TypeError):
        {customer}


def test_renamed_customer_is_still_found(customer):
    """Renaming after registration keeps the address book consistent."""

    book = AddressBook()
    book.add_customer(customer)
    customer.name = "Alicia"

    assert book.contains_customer(customer)
    assert book.get_customer("Alicia", 5550101) is customer


def test_customer_str(customer):
    """The string form lists name, phone number, and address."""

    assert str(customer) == "Name: Alice | Phone Number: 5550101 | Address: 1 Farm Lane"


def test_customer_owns_an_empty_cart(customer):
    """Each customer starts with an empty cart of their own."""

    assert customer.cart.is_empty()
    customer.cart.add_product(Product(Barcode.EGG))

    contents = customer.cart.get_contents()
    contents.clear()

    assert len(customer.cart) == 1
    customer.cart.clear()
    assert customer.cart.is_empty()


# ---------------------------------------------------------------------------
# Address book
# ---------------------------------------------------------------------------


def test_address_book_add_and_lookup(customer, other_customer):
    """Customers are stored in insertion order and found by identity."""

    book = AddressBook()
    book.add_customer(customer)
    book.add_customer(other_customer)

    assert book.get_all_records() == [customer, other_customer]
    assert book.contains_customer(Customer("Bob", 5550202, "anywhere"))
    assert book.get_customer("Bob", 5550202) is other_customer


def test_address_book_rejects_duplicates(customer):
    """The same name and phone number cannot be registered twice."""

    book = AddressBook()
    book.add_customer(customer)

    with pytest.raises(DuplicateCustomerError):
        book.add_customer(Customer("Alice", 5550101, "Other"))


def test_address_book_missing_customer_raises(customer):
    """Unknown customers raise a missing reference error."""

    book = AddressBook()
    book.add_customer(customer)

    with pytest.raises(CustomerNotFoundError):
        book.get_customer("Alice", 9999999)
    assert issubclass(CustomerNotFoundError, MissingReferenceError)
