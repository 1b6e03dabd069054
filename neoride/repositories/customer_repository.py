from neoride.models.customer import Customer
from neoride.repositories.base import DocumentRepository


class CustomerRepository(DocumentRepository[Customer]):
    """Customer persistence (MongoDB "customers" collection)."""

    entity = "Customer"
    model = Customer
    unique_fields = ("externalId", "email")
