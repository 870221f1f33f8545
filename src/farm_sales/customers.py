"""Customer records and the address book that stores them."""

from __future__ import annotations

from typing import List

from . import log
from .cart import Cart
from .exceptions import CustomerNotFoundError, DuplicateCustomerError


class Customer:
    """A shopper identified by name and phone number, owning one cart.

    Invalid updates (blank names or addresses, non-positive phone numbers) are
    ignored and the previous value is kept. Identity fields are mutable, so
    customers compare by value but are not hashable.
    """

    def __init__(self, name: str, phone_number: int, address: str) -> None:
        if not name.strip():
            log.error("Rejected customer with an empty name")
            raise ValueError("Customer name must not be empty")
        if phone_number <= 0:
            log.error("Rejected customer '%s' with phone number %s", name, phone_number)
            raise ValueError("Customer phone number must be positive")
        self._name = name.rstrip()
        self._phone_number = phone_number
        self._address = address.rstrip()
        self._cart = Cart()

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, new_name: str) -> None:
        if new_name.strip():
            self._name = new_name.rstrip()

    @property
    def phone_number(self) -> int:
        return self._phone_number

    @phone_number.setter
    def phone_number(self, new_phone: int) -> None:
        if new_phone > 0:
            self._phone_number = new_phone

    @property
    def address(self) -> str:
        return self._address

    @address.setter
    def address(self, new_address: str) -> None:
        if new_address.strip():
            self._address = new_address.rstrip()

    @property
    def cart(self) -> Cart:
        return self._cart

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Customer):
            return NotImplemented
        return (self.name, self.phone_number) == (other.name, other.phone_number)

    def __str__(self) -> str:
        return f"Name: {self.name} | Phone Number: {self.phone_number} | Address: {self.address}"

    def __repr__(self) -> str:
        return f"Customer(name={self.name!r}, phone_number={self.phone_number!r})"


class AddressBook:
    """In-memory register of known customers, in insertion order."""

    def __init__(self) -> None:
        self._customers: List[Customer] = []

    def add_customer(self, customer: Customer) -> None:
        """Register ``customer``.

        Raises:
            DuplicateCustomerError: If a customer with the same name and phone
                number is already registered.
        """
        if self.contains_customer(customer):
            log.warning("Duplicate customer rejected: %s", customer)
            raise DuplicateCustomerError(str(customer))
        self._customers.append(customer)
        log.info("Registered customer '%s'", customer.name)

    def get_all_records(self) -> List[Customer]:
        return list(self._customers)

    def contains_customer(self, customer: Customer) -> bool:
        return customer in self._customers

    def get_customer(self, name: str, phone_number: int) -> Customer:
        """Look up a customer by exact name and phone number.

        Raises:
            CustomerNotFoundError: If no registered customer matches.
        """
        for customer in self._customers:
            if customer.name == name and customer.phone_number == phone_number:
                return customer
        log.warning("Customer lookup failed for '%s' (%s)", name, phone_number)
        raise CustomerNotFoundError(f"Unknown customer: {name} ({phone_number})")
