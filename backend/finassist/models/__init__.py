from finassist.models.account import Account
from finassist.models.category import Category
from finassist.models.investment_asset import InvestmentAsset
from finassist.models.lend_borrow import LendBorrow
from finassist.models.purchase import Purchase
from finassist.models.savings_goal import SavingsGoal
from finassist.models.transaction import Transaction

__all__ = [
    "Account",
    "Transaction",
    "Purchase",
    "LendBorrow",
    "SavingsGoal",
    "Category",
    "InvestmentAsset",
]
