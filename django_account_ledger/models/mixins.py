"""
Django Ledger created by Miguel Sanda <msanda@arrobalytics.com>.
Copyright© EDMA Group Inc licensed under the GPLv3 Agreement.

Contributions to this module:
    * Miguel Sanda <msanda@arrobalytics.com>

This module implements the different model MixIns used on different Django Account Ledger Models to implement common
functionality.
"""
import logging

from django.conf import settings
from django.db import models
from django.utils.encoding import force_str
from django.utils.translation import gettext_lazy as _
from markdown import markdown

logging.basicConfig(format='%(asctime)s %(message)s', datefmt='%m/%d/%Y %I:%M:%S %p')

__all__ = [
    'CreateUpdateMixIn',
    'MarkdownNotesMixIn',
    'LoggingMixIn',
]


class CreateUpdateMixIn(models.Model):
    """
    Implements a created and an updated field to a base Django Model.

    Attributes
    ----------
    created: datetime
        A created timestamp. Defaults to now().
    updated: str
        An updated timestamp used to identify when models are updated.
    """
    created = models.DateTimeField(auto_now_add=True)
    updated = models.DateTimeField(auto_now=True, null=True, blank=True)

    class Meta:
        abstract = True


class MarkdownNotesMixIn(models.Model):
    """
    Implements functionality used to add a Mark-Down notes to a base Django Model.

    Attributes
    ----------
    markdown_notes: str
        A string of text representing the mark-down document.
    """
    markdown_notes = models.TextField(blank=True, null=True, verbose_name=_('Markdown Notes'))

    class Meta:
        abstract = True

    def notes_html(self):
        """
        Compiles the markdown_notes field into html.

        Returns
        -------
        str
            Compiled HTML document as a string.
        """
        if not self.markdown_notes:
            return ''
        return markdown(force_str(self.markdown_notes))


class LoggingMixIn:
    """
    Implements functionality used to add logging capabilities to any python class.
    Useful for production and or testing environments.
    """
    LOGGER_NAME_ATTRIBUTE = None
    LOGGER_BYPASS_DEBUG = False

    def get_logger_name(self):
        if self.LOGGER_NAME_ATTRIBUTE is None:
            raise NotImplementedError(f'{self.__class__.__name__} must define LOGGER_NAME_ATTRIBUTE of implement '
                                      'get_logger_name() function.')
        return getattr(self, self.LOGGER_NAME_ATTRIBUTE)

    def get_logger(self) -> logging.Logger:
        name = self.get_logger_name()
        return logging.getLogger(name)

    def send_log(self, msg, level, force=False):
        if self.LOGGER_BYPASS_DEBUG or settings.DEBUG or force:
            logger = self.get_logger()
            logger.log(msg=msg, level=level)
