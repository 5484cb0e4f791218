from models.app_config import AppConfig
from models.audit_log import AuditLog
from models.inventory import InventoryRecord
from models.inventory_audit import InventoryAudit
from models.purchase_orders import PurchaseOrder
from models.purchase_order_items import PurchaseOrderItem
from models.purchase_tax_invoices import PurchaseTaxInvoice
from models.purchase_tax_invoice_items import PurchaseTaxInvoiceItem
from models.sales_tax_invoices import SalesTaxInvoice
from models.sales_tax_invoice_items import SalesTaxInvoiceItem

__all__ = ['AppConfig', 'AuditLog', 'InventoryAudit', 'InventoryRecord', 'PurchaseOrder', 'PurchaseOrderItem', 'PurchaseTaxInvoice', 'PurchaseTaxInvoiceItem', 'SalesTaxInvoice', 'SalesTaxInvoiceItem',]
