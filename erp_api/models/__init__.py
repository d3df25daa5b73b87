# Import every model so Base.metadata knows all tables

from erp_api.models.companies import Company
from erp_api.models.customers import Customer
from erp_api.models.products import Product
from erp_api.models.orders import Order
from erp_api.models.invoices import Invoice
from erp_api.models.invoice_items import InvoiceItem
from erp_api.models.quotes import Quote
from erp_api.models.quote_items import QuoteItem
from erp_api.models.sales import Sale
from erp_api.models.transactions import Transaction
from erp_api.models.payments import Payment
from erp_api.models.employees import Employee
from erp_api.models.users import User

__all__ = [
    "Company",
    "Customer",
    "Product",
    "Order",
    "Invoice",
    "InvoiceItem",
    "Quote",
    "QuoteItem",
    "Sale",
    "Transaction",
    "Payment",
    "Employee",
    "User",
]
