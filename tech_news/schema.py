from pydantic import BaseModel
from typing import List

from .models import Article

class FeedOut(BaseModel):
    query: str
    is_loading: bool
    is_extracting_content: bool
    articles: List[Article]

class SavedStatusOut(BaseModel):
    url: str
    saved: bool
