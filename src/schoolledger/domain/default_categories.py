"""Default school category taxonomy.

Each entry is (name, category_type, subcategories). category_type is only
meaningful for income categories.
"""

INCOME_CATEGORIES = [
    # Revenue income
    (
        "Student Fees",
        "income",
        ["Tuition Fees", "Admission / Registration Fees", "Transport Fees", "Other Academic Fees"],
    ),
    ("Donations", "income", ["General Donations (Revenue)", "Capital Donations (Restricted)"]),
    ("Sponsorships", "income", ["Event Sponsorships", "Program / Activity Sponsorships"]),
    ("Grants", "income", ["Revenue Grants", "Capital Grants"]),
    (
        "Other Operating Income",
        "income",
        [
            "Late Fees / Fines",
            "Certificate / Examination Charges",
            "Interest Received",
            "Miscellaneous Operating Income",
        ],
    ),
    ("Accounts Receivable", "income", ["Settlement"]),
    # Capital and non-operating inflows
    (
        "Capital Introduced",
        "capital",
        ["Investment by Board Members", "Additional Capital Contribution", "Founder / Promoter Capital"],
    ),
    ("Equity", "capital", ["Capital Injection"]),
    (
        "Loans Received",
        "capital",
        ["Bank / Financial Institution Loans", "Director / Board Member Loans", "Short-Term Loans"],
    ),
    (
        "Refundable Deposits & Advances",
        "capital",
        ["Security Deposits Received", "Caution Deposits", "Advances Received (Refundable)"],
    ),
    ("Asset Sale Proceeds", "capital", ["Sale of Fixed Assets", "Sale of Scrap / Old Items"]),
    (
        "Other Non-Operating Receipts",
        "capital",
        ["Insurance Claim Received", "Refunds / Reimbursements Received", "Extraordinary / One-time Receipts"],
    ),
]

EXPENSE_CATEGORIES = [
    (
        "Infrastructure & Construction",
        None,
        ["Building construction", "Furniture", "Classroom setup", "Repairs & renovation"],
    ),
    ("Utilities", None, ["Electricity", "Water", "Internet", "Telephone"]),
    ("Events & Activities", None, ["Annual Day Celebration", "Sports Day", "Cultural Programs", "Competitions"]),
    ("Administrative Expenses", None, ["Office supplies", "Printing & stationery", "Software subscriptions"]),
    ("Academic & Educational", None, ["Books", "Laboratory", "Examinations", "Library"]),
    ("Operational Expenses", None, ["Salary", "Staff Welfare"]),
    ("Maintenance & Housekeeping", None, ["Cleaning", "Security", "Pest Control"]),
    ("Professional & Financial", None, ["Audit", "Legal", "Bank Charges", "Interest Paid"]),
    ("Accounts Payable", None, ["Settlement"]),
]
