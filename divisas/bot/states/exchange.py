"""FSM states for the buy/sell flow."""

from aiogram.fsm.state import State, StatesGroup


class SettleStates(StatesGroup):
    """Amount entry, then confirmation of the quoted total."""

    waiting_amount = State()
    waiting_confirm = State()
