"""
Domain modules for the PDF renamer.

- product_code: Product code generation and parsing
- validation: Rule table, field/form/file validation
- file_handler: Filename building, sanitizing and file metadata
- pdf_analyzer: Page count and size of uploaded PDFs
- formatting: Swiss number and file size formatting
- i18n: German/English texts
"""
