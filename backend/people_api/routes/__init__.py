# Routes package init
"""
People API — Routes Package
=============================

Route Inventory:
    - people.py:  GET  /people?t=     (substring search)
                  GET  /people/count  (total people)
                  GET  /people/{id}   (single person)
                  POST /people        (create person)
    - health.py:  GET  /health        (store connectivity)

Routes stay thin: extract request data, call the repository, shape the
response. Status-code mapping for errors lives in main.py.
"""
