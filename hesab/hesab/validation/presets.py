"""
Rule sets for the accounting API request bodies.

Optional fields are marked ``nullable`` so that an omitted value is not
checked against its format rules.
"""

from __future__ import annotations

REGISTER: dict[str, str] = {
    "username": "required|string|min:3|max:30|regex:^[a-zA-Z0-9_]+$",
    "email": "required|email",
    "password": "required|strongPassword|min:8",
    "confirmPassword": "required|confirmed:password",
    "fullName": "required|string|min:2|max:100",
    "phone": "nullable|phone",
    "nationalId": "nullable|nationalId",
}

LOGIN: dict[str, str] = {
    "username": "required|string|min:3",
    "password": "required|string|min:6",
}

CHANGE_PASSWORD: dict[str, str] = {
    "currentPassword": "required|string",
    "newPassword": "required|strongPassword|min:8",
    "confirmPassword": "required|confirmed:newPassword",
}

CUSTOMER: dict[str, str] = {
    "name": "required|string|min:2|max:100",
    "company": "nullable|string|max:100",
    "email": "nullable|email",
    "phone": "nullable|phone",
    "mobile": "nullable|phone",
    "nationalId": "nullable|nationalId",
    "postalCode": "nullable|postalCode",
    "sheba": "nullable|sheba",
    "customerType": "required|in:individual,company",
    "creditLimit": "nullable|numeric|min:0",
    "paymentTerms": "nullable|integer|min:0|max:365",
}

PRODUCT: dict[str, str] = {
    "name": "required|string|min:2|max:200",
    "sku": "nullable|string|max:50",
    "categoryId": "nullable|integer|exists:product_categories,id",
    "purchasePrice": "nullable|numeric|min:0",
    "sellingPrice": "nullable|numeric|min:0",
    "stockQuantity": "nullable|integer|min:0",
    "minStockLevel": "nullable|integer|min:0",
    "maxStockLevel": "nullable|integer|min:0",
    "taxRate": "nullable|numeric|min:0|max:100",
    "discountRate": "nullable|numeric|min:0|max:100",
}

INVOICE: dict[str, str] = {
    "customerId": "required|integer|exists:customers,id",
    "invoiceDate": "required|date",
    "dueDate": "nullable|date|afterToday",
    "currencyCode": "required|string|exists:currencies,code",
    "status": "nullable|in:draft,sent,paid,overdue,cancelled",
    "paymentMethod": "nullable|string|max:50",
    "items": "required|array|min:1",
    "items.*.productId": "required|integer|exists:products,id",
    "items.*.quantity": "required|numeric|min:0.001",
    "items.*.unitPrice": "required|numeric|min:0",
}

PAYMENT: dict[str, str] = {
    "invoiceId": "nullable|integer|exists:invoices,id",
    "paymentDate": "required|date",
    "amount": "required|numeric|min:0.01",
    "currencyCode": "required|string|exists:currencies,code",
    "paymentMethod": "required|in:cash,card,bank,check,online",
    "referenceNumber": "nullable|string|max:100",
    "checkNumber": "nullable|string|max:50",
    "checkDate": "nullable|date",
}

CHECK: dict[str, str] = {
    "checkNumber": "required|string|max:50",
    "bankName": "required|string|max:100",
    "amount": "required|numeric|min:0.01",
    "currencyCode": "required|string|exists:currencies,code",
    "issueDate": "required|date",
    "dueDate": "required|date|afterToday",
    "checkType": "required|in:received,issued",
    "status": "nullable|in:pending,deposited,cleared,bounced,cancelled",
    "drawerName": "nullable|string|max:100",
    "drawerNationalId": "nullable|nationalId",
}

PRESETS: dict[str, dict[str, str]] = {
    "register": REGISTER,
    "login": LOGIN,
    "change_password": CHANGE_PASSWORD,
    "customer": CUSTOMER,
    "product": PRODUCT,
    "invoice": INVOICE,
    "payment": PAYMENT,
    "check": CHECK,
}
