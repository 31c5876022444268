"""Django project package for the benefits administration backend."""
