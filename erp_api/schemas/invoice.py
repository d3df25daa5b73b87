# erp_api/schemas/invoice.py

from erp_api.schemas.document import DocumentCreate, DocumentResponse


class InvoiceCreate(DocumentCreate):
    pass


class InvoiceResponse(DocumentResponse):
    pass
