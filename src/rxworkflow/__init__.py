"""
RxWorkflow: prescription workflow engine for retail and LTC pharmacy

A clean architecture-based library that moves prescriptions through intake,
data entry, adjudication, DUR review, filling, pharmacist verification and
pickup, keeping an append-only audit trail of every transition.
"""

__version__ = "0.1.0"
__author__ = "RxWorkflow Team"
__description__ = "Prescription workflow state machine for pharmacy operations"
