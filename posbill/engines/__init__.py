"""
POSBILL Engines
=================
catalog  : products and stock
cart     : the open bill being assembled
pricing  : tax / discount / total arithmetic
ledger   : committed bills, newest first
billing  : the commit transaction and operator-facing service
"""
