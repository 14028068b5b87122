from zoneinfo import ZoneInfo

from dealdesk.models.bill import BillType
from dealdesk.models.deal import DealStatus, DealType

IL_TZ = ZoneInfo("Asia/Jerusalem")

DEAL_TYPE_LABELS = {
    DealType.NEW_USED_SALE: "New/used sale",
    DealType.NEW_SALE: "New sale",
    DealType.USED_SALE: "Used sale",
    DealType.NEW_USED_SALE_TAX_INCLUSIVE: "New/used sale (tax incl.)",
    DealType.EXCHANGE: "Exchange",
    DealType.INTERMEDIARY: "Intermediary",
    DealType.FINANCING_ASSISTANCE_INTERMEDIARY: "Financing assistance",
    DealType.COMPANY_COMMISSION: "Company commission",
}

STATUS_LABELS = {
    DealStatus.PENDING: "Pending",
    DealStatus.ACTIVE: "Active",
    DealStatus.COMPLETED: "Completed",
    DealStatus.CANCELLED: "Cancelled",
}

BILL_TYPE_LABELS = {
    BillType.TAX_INVOICE: "Tax invoice",
    BillType.RECEIPT_ONLY: "Receipt",
    BillType.TAX_INVOICE_RECEIPT: "Tax invoice + receipt",
    BillType.GENERAL: "General",
}


def label(labels: dict, value: str) -> str:
    """Look up a display label by raw value, falling back to the value itself."""
    for key, text in labels.items():
        if key.value == value:
            return text
    return value or ""
