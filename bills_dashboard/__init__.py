"""Top-level package for the Bills Dashboard.

The primary modules are:

* ``schedule`` - bucket bills and subscriptions into a month's payment dates
* ``cash_flow`` - day-by-day running balance projection for a month
* ``categories`` - roll scheduled payments up by expense category
* ``scheduler`` - ``SmartPaymentScheduler`` tying the three together
* ``dashboard`` - a Streamlit app that renders everything

To run the dashboard from the command line you can execute:

```bash
streamlit run bills_dashboard/dashboard.py
```
"""

from .cash_flow import project_cash_flow
from .categories import EXPENSE_CATEGORIES, aggregate_categories
from .errors import AuthenticationError, InvalidInputError, InvalidPeriodError
from .models import (
    Bill,
    CashFlowProjection,
    Category,
    CategoryTotal,
    ObligationRef,
    PaymentSchedule,
    Subscription,
    YearMonth,
)
from .schedule import build_schedule
from .scheduler import SchedulePlan, SmartPaymentScheduler

__all__ = [
    "AuthenticationError",
    "Bill",
    "CashFlowProjection",
    "Category",
    "CategoryTotal",
    "EXPENSE_CATEGORIES",
    "InvalidInputError",
    "InvalidPeriodError",
    "ObligationRef",
    "PaymentSchedule",
    "SchedulePlan",
    "SmartPaymentScheduler",
    "Subscription",
    "YearMonth",
    "aggregate_categories",
    "build_schedule",
    "project_cash_flow",
]
