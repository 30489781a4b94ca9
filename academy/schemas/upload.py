# academy/schemas/upload.py
from academy.schemas.base import CamelModel


class UploadPublic(CamelModel):
    url: str
