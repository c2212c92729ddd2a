"""Customer records owning orders.

Registered accounts live with the identity provider; this aggregate only
exists so that a guest purchase has an owner, keyed by the email the payment
processor verified.
"""

from protean.fields import Boolean, DateTime, String

from storefront.domain import storefront
from storefront.shared.clock import utc_now


@storefront.aggregate
class Customer:
    email = String(required=True, max_length=254, unique=True)
    name = String(max_length=100)
    is_guest = Boolean(default=True)
    created_at = DateTime(default=utc_now)

    @classmethod
    def guest(cls, email, name=None):
        email = email.strip().lower()
        return cls(email=email, name=name or email.split("@")[0], is_guest=True)


@storefront.repository(part_of=Customer)
class CustomerRepository:
    def find_by_email(self, email: str) -> Customer | None:
        return self._dao.query.filter(email=email.strip().lower()).all().first

    def find_or_create_guest(self, email: str) -> Customer:
        customer = self.find_by_email(email)
        if customer is None:
            customer = Customer.guest(email)
            self.add(customer)
        return customer
