from trustkit.commands.add_account import AddAccountParams, edit_account_claim
from trustkit.commands.add_operator import AddOperatorParams, edit_operator_claim
from trustkit.commands.add_user import AddUserParams, edit_user_claim

__all__ = [
    "AddAccountParams",
    "AddOperatorParams",
    "AddUserParams",
    "edit_account_claim",
    "edit_operator_claim",
    "edit_user_claim",
]
