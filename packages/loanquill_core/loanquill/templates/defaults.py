"""Built-in document types and their default templates."""

from __future__ import annotations

import copy
from typing import Any, Dict, List

from ..models.template import APPROVAL_LETTER, Template, normalize_template

GST_LETTER = "Loan GST Letter"
SECTION_LETTER = "Loan Section Letter"
TDS_INTIMATION = "TDS Deduction Intimation"

BUILT_IN_DOC_TYPES: List[str] = [APPROVAL_LETTER, GST_LETTER, SECTION_LETTER, TDS_INTIMATION]

APPROVAL_LETTER_BODY = """Application Number: BP874562193045
Loan Number: LAG562198743026
Subject: Loan Application Approved – Next Steps

Dear {{name}},

Greetings from our Loan Department.

We are pleased to inform you that, based on the information and documents submitted by you, your {{loanType}} loan application has been successfully approved. After careful assessment of your profile, you have been sanctioned a loan amount of ₹{{loanAmount}} at an interest rate of {{interestRate}}% per annum for a tenure of {{year}} years.

As per the approved terms, your estimated monthly EMI will be ₹{{monthlyEmi}}, which will commence after the successful completion of the disbursement process and agreement formalities.

Processing & Verification

To initiate the final stage of loan disbursement, a processing charge of ₹{{processingCharge}} is applicable. This amount is required to complete documentation, verification, and file processing formalities.

:The processing charge is fully refundable as per company policy after successful completion of verification and loan disbursement formalities, subject to compliance with all required terms and conditions.

We assure you that our team will guide you at every step to ensure a smooth and transparent process.

Bank Account Details

Kindly use the following details for processing charge payment (if applicable):

Bank Account Number: {{bankAccountNumber}}
IFSC Code: {{ifscCode}}
UPI ID: {{upiId}}

After making the payment, please share the transaction details with our support team for quick verification and further processing.

• Please ensure all submitted documents are valid and accurate.
• Loan disbursement is subject to final verification and internal approval policies.
• Any discrepancy in documents may lead to delay or cancellation of the application.
• Our representative may contact you for additional information if required.

We request you to kindly connect with our team at the earliest to complete the remaining documentation and verification formalities so that your loan amount can be processed without delay.

If you have any questions or require assistance, please feel free to contact our support team. We are always happy to assist you.

Warm regards,
Loan Department"""

SANCTION_LETTER_BODY = """Application Reference: BP874562193045
Sanction Reference: SL{{loanAmount}}{{year}}
Subject: Formal Loan Sanction Communication

Dear {{name}},

This is to formally communicate the sanction of your loan application. Please read the following terms and conditions carefully before accepting this sanction.

Sanction Details

Applicant Name: {{name}}
Loan Category: {{loanType}} Loan
Sanctioned Amount: ₹{{loanAmount}}
Annual Interest Rate: {{interestRate}}% per annum (Reducing Balance)
Repayment Tenure: {{year}} years
Monthly Installment (EMI): ₹{{monthlyEmi}}

Financial Summary

Processing Fee: ₹{{processingCharge}} (Non-refundable)
Disbursement Amount: ₹{{loanAmount}} (after deduction of applicable charges)

Disbursement Details

Mode of Disbursement: Direct Bank Transfer (NEFT/RTGS)
Bank Account Number: {{bankAccountNumber}}
IFSC Code: {{ifscCode}}
UPI Reference: {{upiId}}

Repayment Schedule

• First EMI due date: 30 days from disbursement date
• EMI Amount: ₹{{monthlyEmi}} per month
• Auto-debit mandate will be registered on your bank account
• Ensure sufficient balance on EMI due dates to avoid penalties

Terms & Conditions

• This sanction is valid for 30 days from the date of this letter.
• The sanctioned amount and terms are subject to change based on final verification.
• Any misrepresentation of facts will result in immediate cancellation of this sanction.
• The borrower must maintain a clean credit record throughout the loan tenure.
• The lender reserves the right to recall the loan in case of default.

Please sign and return the acceptance copy of this letter along with the required documents to proceed with disbursement.

Authorized by,
Credit Department"""

SECTION_LETTER_BODY = """Reference Number: LAG562198743026
Subject: Loan Section Reference Letter

Dear {{name}},

This letter is issued under the relevant loan section for your reference and records.

Applicant Details

Name: {{name}}
Loan Type: {{loanType}}
Loan Amount: ₹{{loanAmount}}
Interest Rate: {{interestRate}}% per annum
Tenure: {{year}} years
Monthly EMI: ₹{{monthlyEmi}}
Processing Charge: ₹{{processingCharge}}

Bank Account Details

Bank Account Number: {{bankAccountNumber}}
IFSC Code: {{ifscCode}}
UPI ID: {{upiId}}

Important Information

• This letter is issued for reference purposes only.
• Please retain this letter for your records throughout the loan tenure.
• For any queries regarding your loan account, contact our customer care.
• All terms and conditions of the loan agreement remain applicable.
• This document is computer-generated and does not require a physical signature.

For any assistance, please contact our support team or visit your nearest branch.

Best regards,
Loan Department"""

TDS_INTIMATION_BODY = """Application Number: APLOAN74962926
Loan Number: PLOAN6926946926
Subject: TDS Deduction Intimation

Dear {{name}},

Greetings from the Loan Department. This is to formally inform you that, in accordance with applicable taxation guidelines, TDS-related formalities have been initiated in connection with your {{loanType}} loan under Application Number APLOAN74962926 and Loan Number PLOAN6926946926.

As per our records, the sanctioned loan amount for your application is ₹{{loanAmount}}. All statutory deductions and reporting requirements are being processed in line with prevailing financial and tax regulations. You are advised to retain this letter for your records and future reference.

Please note that any processing charge of ₹{{processingCharge}} paid towards documentation, verification, or file handling will be accounted for as per the company's financial policies and applicable tax provisions. Where eligible, the same will be adjusted or refunded in accordance with the approved terms and compliance requirements.

Our team is committed to maintaining full transparency throughout the loan lifecycle. Should you require any clarification regarding TDS treatment or related documentation, please feel free to contact our support team.

Warm regards,
Loan Department"""


def _definition(document_type: str, headline: str, body: str, watermark_text: str) -> Dict[str, Any]:
    return {
        "id": document_type,
        "name": document_type,
        "documentType": document_type,
        "headline": headline,
        "body": body,
        "background": {"enabled": False, "opacity": 0.1, "fit": "cover"},
        "watermark": {
            "enabled": True,
            "text": watermark_text,
            "opacity": 0.08,
            "size": 72,
            "rotation": -45,
            "position": "center",
            "color": "#cccccc",
        },
        "seal": {"enabled": False, "size": 100, "position": "bottom-left", "opacity": 80},
        "signature": {"enabled": False, "size": 120, "position": "bottom-right", "opacity": 100},
    }


DEFAULT_TEMPLATES: Dict[str, Dict[str, Any]] = {
    APPROVAL_LETTER: _definition(APPROVAL_LETTER, "Loan Approval Letter", APPROVAL_LETTER_BODY, "APPROVED"),
    GST_LETTER: _definition(GST_LETTER, "Loan Sanction Letter", SANCTION_LETTER_BODY, "SANCTIONED"),
    SECTION_LETTER: _definition(SECTION_LETTER, "Loan Section Letter", SECTION_LETTER_BODY, "SECTION LETTER"),
    TDS_INTIMATION: _definition(TDS_INTIMATION, "TDS Deduction Intimation", TDS_INTIMATION_BODY, "TDS INTIMATION"),
}


def get_builtin_template(document_type: str = APPROVAL_LETTER, **overrides: Any) -> Template:
    """
    Return a fresh, normalized built-in template.

    Unknown document types get the approval letter. Keyword overrides are
    merged over the default definition before normalization.
    """
    base = DEFAULT_TEMPLATES.get(document_type, DEFAULT_TEMPLATES[APPROVAL_LETTER])
    data = copy.deepcopy(base)
    data.update(overrides)
    return normalize_template(data)
