"""Navigator Vault Meta information.
   Navigator Vault keeps a HashiCorp Vault session authenticated and
   transparently re-authenticates operations failing on expired tokens.
"""
__title__ = 'navigator_vault'
__description__ = (
   'Navigator Vault keeps a HashiCorp Vault token alive and '
   're-authenticates failed operations.'
)
__version__ = '0.3.0'
__copyright__ = 'Copyright (c) 2023 Jesus Lara'
__author__ = 'Jesus Lara'
__author_email__ = 'jesuslarag@gmail.com'
__license__ = 'Apache-2.0'
__url__ = 'https://github.com/phenobarbital/navigator-vault'
