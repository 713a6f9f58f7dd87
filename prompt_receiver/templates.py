# prompt_receiver/templates.py
"""
Canned display templates, one per classifier category.

render_template() returns a JSON layout descriptor the front end draws
without any further logic:
{
  "template": "<Category value>",
  "title": str,
  "subtitle": str,
  "sections": [ {"type": "metrics"|"list"|"form"|"table"|"actions"|"text", ...} ]
}

fallback_component_code() returns React/JSX source used in place of the
completion API's output when that call fails.
"""

import copy
from typing import Any, Dict, List, Optional

from prompt_receiver.classifier import Category, classify

_VENDOR_INSIGHTS: Dict[str, Any] = {
    "title": "AI Vendor Insights",
    "subtitle": "Intelligent vendor risk assessment & optimization",
    "sections": [
        {
            "type": "metrics",
            "items": [
                {"title": "Low Risk", "value": "23", "change": "+2", "color": "green"},
                {"title": "Medium Risk", "value": "8", "change": "0", "color": "yellow"},
                {"title": "High Risk", "value": "3", "change": "+1", "color": "red"},
                {"title": "Saved", "value": "$620", "change": "This Month", "color": "blue"},
            ],
        },
        {
            "type": "list",
            "title": "Recent Anomalies",
            "badge": "3 New",
            "items": [
                {"company": "Acme Corp", "issue": "Price 22% higher than previous 3 invoices",
                 "detail": "Expected: $1,200 | Actual: $1,464", "time": "2h ago", "action": "Review"},
                {"company": "TechSupply Co.", "issue": "Invoice expected May 5, not received",
                 "detail": "Typical amount: ~$850", "time": "1d ago", "action": "Contact"},
            ],
        },
        {
            "type": "list",
            "title": "Payment Opportunities",
            "badge": "$248 Available",
            "items": [
                {"company": "Office Supplies Co.", "issue": "2% early payment discount",
                 "detail": "Invoice: $2,400 | Save: $48", "time": "4 days left", "action": "Pay Now"},
            ],
        },
        {
            "type": "actions",
            "title": "Recommended Actions",
            "items": [
                {"title": "Review High-Risk Vendors", "desc": "3 vendors need attention"},
                {"title": "Process Early Payments", "desc": "Save $248 this week"},
                {"title": "Contact Overdue Vendors", "desc": "2 invoices missing"},
            ],
        },
    ],
}

_DASHBOARD: Dict[str, Any] = {
    "title": "Analytics Dashboard",
    "subtitle": "Key metrics at a glance",
    "sections": [
        {
            "type": "metrics",
            "items": [
                {"title": "Users", "value": "12,345", "color": "blue"},
                {"title": "Revenue", "value": "$89,123", "color": "green"},
                {"title": "Orders", "value": "1,456", "color": "purple"},
            ],
        },
    ],
}

_FORM: Dict[str, Any] = {
    "title": "Generated Form",
    "subtitle": "Fill in the details below",
    "sections": [
        {
            "type": "form",
            "fields": [
                {"name": "full_name", "input": "text", "placeholder": "Full Name"},
                {"name": "email", "input": "email", "placeholder": "Email Address"},
                {"name": "message", "input": "textarea", "placeholder": "Your Message"},
            ],
            "submit": "Submit Form",
        },
    ],
}

_DATA_TABLE: Dict[str, Any] = {
    "title": "Data Table",
    "subtitle": "Latest records",
    "sections": [
        {
            "type": "table",
            "columns": ["Name", "Status", "Date", "Amount"],
            "rows": [
                ["John Doe", "Active", "2024-01-15", "$1,250"],
                ["Jane Smith", "Pending", "2024-01-14", "$850"],
            ],
        },
    ],
}

_FINANCE: Dict[str, Any] = {
    "title": "Finance Overview",
    "subtitle": "Billing and payment summary",
    "sections": [
        {
            "type": "metrics",
            "items": [
                {"title": "Monthly Spend", "value": "$47,250", "change": "-3.2%", "color": "blue"},
                {"title": "Outstanding Invoices", "value": "12", "color": "yellow"},
                {"title": "Early Payment Savings", "value": "$248", "color": "green"},
            ],
        },
        {
            "type": "table",
            "columns": ["Invoice", "Vendor", "Due", "Amount"],
            "rows": [
                ["INV-1042", "Office Supplies Co.", "2024-05-10", "$2,400"],
                ["INV-1043", "Acme Corp", "2024-05-12", "$1,464"],
            ],
        },
    ],
}

_ECOMMERCE: Dict[str, Any] = {
    "title": "Product Catalog",
    "subtitle": "Featured products",
    "sections": [
        {
            "type": "list",
            "title": "Products",
            "items": [
                {"name": "Wireless Headphones", "price": "$129", "stock": "In stock"},
                {"name": "Smart Watch", "price": "$249", "stock": "Low stock"},
                {"name": "Laptop Stand", "price": "$59", "stock": "In stock"},
            ],
        },
        {
            "type": "actions",
            "title": "Cart",
            "items": [{"title": "View Cart", "desc": "0 items"}],
        },
    ],
}

_LAYOUTS: Dict[Category, Dict[str, Any]] = {
    Category.VENDOR_INSIGHTS: _VENDOR_INSIGHTS,
    Category.DASHBOARD: _DASHBOARD,
    Category.FORM: _FORM,
    Category.DATA_TABLE: _DATA_TABLE,
    Category.FINANCE: _FINANCE,
    Category.ECOMMERCE: _ECOMMERCE,
}


def _generic_layout(prompt: str) -> Dict[str, Any]:
    return {
        "title": "Smart Generated Interface",
        "subtitle": "Analyzed your prompt",
        "sections": [
            {"type": "text", "body": prompt},
            {"type": "text", "body": f"Prompt length: {len(prompt)} characters"},
        ],
    }


def render_template(category: Optional[Category], prompt: str) -> Dict[str, Any]:
    """Build the layout descriptor for `category` (classified from `prompt` if None)."""
    prompt = prompt or ""
    if category is None:
        category = classify(prompt)
    layout = _LAYOUTS.get(category)
    body = copy.deepcopy(layout) if layout is not None else _generic_layout(prompt)
    out: Dict[str, Any] = {"template": category.value, "prompt": prompt}
    out.update(body)
    return out


def template_names() -> List[str]:
    return [c.value for c in Category]


# ---------------------------------------------------------------------------
# Fallback component source
# ---------------------------------------------------------------------------

VENDOR_DASHBOARD_CODE = """import React, { useState } from 'react'
import { Card, CardContent, CardHeader, CardTitle } from '@/components/ui/card'
import { Badge } from '@/components/ui/badge'
import { Button } from '@/components/ui/button'

export default function VendorDashboard() {
  const [activeTab, setActiveTab] = useState('overview')

  const riskMetrics = [
    { level: 'Low Risk', count: 23, color: 'bg-green-500', change: '+2' },
    { level: 'Medium Risk', count: 8, color: 'bg-yellow-500', change: '0' },
    { level: 'High Risk', count: 3, color: 'bg-red-500', change: '+1' }
  ]

  const anomalies = [
    { vendor: 'Acme Corp', issue: 'Price 22% higher than previous invoices', time: '2h ago' },
    { vendor: 'TechSupply Co.', issue: 'Invoice expected May 5, not received', time: '1d ago' }
  ]

  return (
    <div className="min-h-screen bg-gradient-to-br from-slate-50 to-slate-100 p-6">
      <div className="max-w-7xl mx-auto space-y-6">
        <h1 className="text-4xl font-bold text-slate-900">AI Vendor Insights</h1>
        <div className="grid grid-cols-1 md:grid-cols-3 gap-6">
          {riskMetrics.map((metric, index) => (
            <Card key={index} className="hover:shadow-lg transition-all">
              <CardContent className="p-6">
                <div className="text-3xl font-bold">{metric.count}</div>
                <div className="text-slate-600">{metric.level}</div>
                <Badge variant="outline">{metric.change}</Badge>
              </CardContent>
            </Card>
          ))}
        </div>
        <Card>
          <CardHeader>
            <CardTitle>Recent Anomalies</CardTitle>
          </CardHeader>
          <CardContent className="space-y-4">
            {anomalies.map((anomaly, index) => (
              <div key={index} className="border-l-4 border-red-400 bg-red-50 p-4 rounded-r-lg">
                <h4 className="font-semibold text-red-900">{anomaly.vendor}</h4>
                <p className="text-sm text-slate-600">{anomaly.issue}</p>
                <span className="text-xs text-slate-500">{anomaly.time}</span>
                <Button size="sm" variant="outline">Review</Button>
              </div>
            ))}
          </CardContent>
        </Card>
      </div>
    </div>
  )
}"""

GENERIC_COMPONENT_TEMPLATE = """import React, { useState } from 'react'
import { Card, CardContent, CardDescription, CardHeader, CardTitle } from '@/components/ui/card'
import { Button } from '@/components/ui/button'

export default function GeneratedComponent() {
  const [isActive, setIsActive] = useState(false)

  return (
    <div className="min-h-screen bg-gradient-to-br from-slate-50 to-slate-100 p-6">
      <div className="max-w-4xl mx-auto">
        <Card className="hover:shadow-xl transition-all duration-300">
          <CardHeader className="text-center">
            <CardTitle className="text-3xl font-bold">__TITLE__</CardTitle>
            <CardDescription className="text-lg">Built from your prompt: "__PROMPT__"</CardDescription>
          </CardHeader>
          <CardContent className="text-center">
            <Button onClick={() => setIsActive(!isActive)}>
              {isActive ? 'Active!' : 'Click to Activate'}
            </Button>
          </CardContent>
        </Card>
      </div>
    </div>
  )
}"""


def _escape_jsx_text(text: str) -> str:
    return (
        text.replace("\\", "\\\\")
        .replace('"', "&quot;")
        .replace("{", "&#123;")
        .replace("}", "&#125;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
    )


def fallback_component_code(prompt: str, category: Optional[Category] = None) -> str:
    """Deterministic component source for `prompt`."""
    prompt = prompt or ""
    if category is None:
        category = classify(prompt)
    if category in (Category.VENDOR_INSIGHTS, Category.DASHBOARD):
        return VENDOR_DASHBOARD_CODE
    title = "Generated Component" if category == Category.GENERIC else f"Generated {category.value} Component"
    return (
        GENERIC_COMPONENT_TEMPLATE
        .replace("__TITLE__", title)
        .replace("__PROMPT__", _escape_jsx_text(prompt))
    )
