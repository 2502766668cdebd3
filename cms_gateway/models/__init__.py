from .apikey import ApiKey
from .content import Page, Product, BlogPost, Form, FormSubmission

__all__ = ["ApiKey", "Page", "Product", "BlogPost", "Form", "FormSubmission"]
