"""Routing — ordered route table with regex path matching.

Routes are registered during setup and frozen by ``Router.compile()``
before requests are dispatched.
"""
