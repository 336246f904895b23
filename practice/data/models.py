"""Database models for the practice data layer.

Each entity lives in its own subpackage; this module collects them so routes
and engines can import a single namespace.
"""
from practice.data.clients.models import Client
from practice.data.allies.models import Ally
from practice.data.goals.models import Goal, Subgoal
from practice.data.budget.models import BudgetSettings, BudgetItem, BudgetItemCatalog
from practice.data.sessions.models import Session, SessionNote, GoalAssessment, MilestoneAssessment
from practice.data.strategies.models import Strategy
from practice.data.clinicians.models import Clinician, ClientClinician

__all__ = [
    "Client",
    "Ally",
    "Goal",
    "Subgoal",
    "BudgetSettings",
    "BudgetItem",
    "BudgetItemCatalog",
    "Session",
    "SessionNote",
    "GoalAssessment",
    "MilestoneAssessment",
    "Strategy",
    "Clinician",
    "ClientClinician",
]
