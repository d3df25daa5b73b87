# erp_api/schemas/quote.py

from erp_api.schemas.document import DocumentCreate, DocumentResponse


class QuoteCreate(DocumentCreate):
    pass


class QuoteResponse(DocumentResponse):
    pass
