"""ticketgate: pull request gate backed by Jira tickets."""

__version__ = "0.1.0"
