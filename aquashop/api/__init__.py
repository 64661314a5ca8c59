# aquashop/api/__init__.py
